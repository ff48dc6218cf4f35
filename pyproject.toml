[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "supervisory"
version = "0.1.0"
description = "A small TCP telemetry system: a multithreaded storage server, a random-value producer and a consumer that fetches recent samples."
requires-python = ">=3.10"
dependencies = []
keywords = ["telemetry", "tcp", "monitoring", "supervisory", "sensor"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
supervisory-server = "supervisory.server:main"
supervisory-producer = "supervisory.producer:main"
supervisory-consumer = "supervisory.consumer:main"

[tool.hatch.build.targets.wheel]
packages = ["supervisory"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
