from pluggy import HookimplMarker, HookspecMarker

hookspec = HookspecMarker("s3_website_setup")
hookimpl = HookimplMarker("s3_website_setup")


@hookspec
def register_providers():
    "A list of Provider subclasses, each with a unique name attribute"
