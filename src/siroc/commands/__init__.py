"""Command handlers — the work behind ``build``, ``dev``, ``run`` and ``changelog``.

Every handler takes the :class:`~siroc.core.models.RootContext` first,
reports through ``context.logger`` and raises
:class:`~siroc.exceptions.SirocError` subclasses on failure; the run
wrapper in :mod:`siroc.cli.runner` turns those into exit codes.
"""
