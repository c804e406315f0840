"""Built-in CLI sub-commands for specmine.

* :mod:`~specmine.commands.build` -- build the full definition.
* :mod:`~specmine.commands.inspect` -- show what one page yields.
* :mod:`~specmine.commands.config` -- view and modify global settings.
* :mod:`~specmine.commands.cache` -- inspect and clear the page cache.

Multi-command groups export a :class:`typer.Typer` sub-application; the
single ``build`` command is a plain function registered on the root app.
"""
