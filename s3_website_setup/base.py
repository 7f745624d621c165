from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class Identity:
    account: Optional[str]
    arn: Optional[str]
    user_id: Optional[str]


class Provider(ABC):
    name: str

    @classmethod
    def from_config(cls, config) -> "Provider":
        return cls(region=config.region)

    @abstractmethod
    def check_available(self) -> None:
        # Raise ToolMissing if the backend cannot be used at all
        pass

    @abstractmethod
    def caller_identity(self) -> Identity:
        # Raise NotAuthenticated if credentials are absent or rejected
        pass

    @abstractmethod
    def bucket_exists(self, bucket: str) -> bool:
        # False only for "not found", anything else raises ApiCallFailed
        pass

    @abstractmethod
    def create_bucket(self, bucket: str, region: str) -> None:
        pass

    @abstractmethod
    def put_bucket_website(self, bucket: str, website: dict) -> None:
        pass

    @abstractmethod
    def put_public_access_block(self, bucket: str, block: dict) -> None:
        pass

    @abstractmethod
    def put_bucket_policy(self, bucket: str, policy: dict) -> None:
        pass

    @abstractmethod
    def put_bucket_cors(self, bucket: str, cors: dict) -> None:
        pass
