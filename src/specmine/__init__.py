"""specmine -- Extract a machine-readable API definition from documentation pages.

The upstream API documentation ships as human-authored HTML (or Markdown
rendered to HTML) with no canonical schema. This package walks those pages,
locates operation and object sections by heading conventions, and turns
their prose and tables into a normalized ``{baseUri, version, operations,
models}`` definition.

Typical workflow::

    specmine build                     # fetch every configured page
    specmine build --source ./docs     # read pages from a local checkout
    specmine inspect operations channel

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic models for the definition and the configuration.
    config: XDG-aware configuration and curated override loading.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    extraction: The heuristic extraction engine.
    source: Document sources (HTTP, local directory) and page rendering.
"""

__version__ = "0.1.0"
