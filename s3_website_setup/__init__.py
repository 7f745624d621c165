import pluggy

from . import awscli, boto, hookspecs
from .base import Identity, Provider
from .config import SiteConfig, load_config
from .errors import ConfigError

pm = pluggy.PluginManager("s3_website_setup")
pm.add_hookspecs(hookspecs)
pm.register(boto, name="boto3")
pm.register(awscli, name="awscli")
pm.load_setuptools_entrypoints("s3_website_setup")


def load_providers():
    providers = {}
    for hook in pm.hook.register_providers():
        for provider_class in hook or []:
            providers[provider_class.name] = provider_class
    return providers


def make_provider(config: SiteConfig) -> Provider:
    providers = load_providers()
    if config.provider not in providers:
        raise ConfigError(
            "Unknown provider '{}', available: {}".format(
                config.provider, ", ".join(sorted(providers))
            )
        )
    return providers[config.provider].from_config(config)
