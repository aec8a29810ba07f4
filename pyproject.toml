[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "overlaynet"
version = "0.1.0"
description = "IPv4/IPv6 address arithmetic and VXLAN/WireGuard overlay backend configuration helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["networking", "overlay", "vxlan", "wireguard", "subnet", "cidr"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["overlaynet"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
