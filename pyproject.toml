[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "procflow"
version = "0.1.0"
description = "Index YAML process definitions, validate and template them, and publish process runs to a RabbitMQ queue through an HTTP endpoint."
requires-python = ">=3.10"
keywords = ["process", "workflow", "rabbitmq", "yaml", "templating", "queue", "flask"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: Flask",
    "Topic :: System :: Distributed Computing",
]
dependencies = [
    "pyyaml>=6.0",
    "flask>=2.3",
    "sqlalchemy>=2.0",
    "pika>=1.3",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[tool.hatch.build.targets.wheel]
packages = ["procflow"]

[tool.hatch.build.targets.sdist]
include = ["procflow", "tests", "pyproject.toml", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
ignore_missing_imports = true
