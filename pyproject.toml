[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wsdb"
version = "0.1.0"
description = "Storage core of a small relational database: typed values, slotted pages, records and table handles"
requires-python = ">=3.10"
dependencies = []
keywords = ["database", "storage", "records", "pages", "slotted-page"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Database Engines/Servers",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["wsdb"]

[tool.pytest.ini_options]
addopts = "-ra"
