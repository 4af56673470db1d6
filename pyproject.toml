[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "memory_graph"
version = "0.1.0"
description = "An embedded memory store for AI agents combining vector similarity search with a graph of related memories."
requires-python = ">=3.10"
dependencies = []
keywords = ["memory", "graph", "vector search", "embeddings", "agents", "knowledge graph", "sqlite"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Database :: Database Engines/Servers",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
memory-graph = "memory_graph.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["memory_graph"]

[tool.pytest.ini_options]
addopts = "-ra"
