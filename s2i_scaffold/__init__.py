from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("s2i-scaffold")
except PackageNotFoundError:
    __version__ = "0.0.0"
