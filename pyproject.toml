[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ppledger"
version = "1.0.0"
description = "A small ledger of wallets and transactions recorded on a proof-of-work block chain, with file-based block storage."
requires-python = ">=3.10"
dependencies = []
keywords = ["ledger", "blockchain", "wallet", "proof-of-work", "block storage"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Accounting",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ppledger"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
