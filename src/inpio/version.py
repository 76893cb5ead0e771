from importlib.metadata import PackageNotFoundError, version

try:
    version = version("InpIO")
except PackageNotFoundError:
    version = "0.0.0"
