[build-system]
requires = ["setuptools>=61.0"]
build-backend = "setuptools.build_meta"

[project]
name = "minishellpy"
version = "0.1.0"
description = "A small interactive shell with pipes, redirections, heredocs and builtins"
requires-python = ">=3.10"
dependencies = []
keywords = ["shell", "command-line", "pipeline", "heredoc", "builtins"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Shells",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
minishellpy = "minishellpy.shell:main"

[tool.setuptools.packages.find]
include = ["minishellpy*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
