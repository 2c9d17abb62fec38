"""JSON web API for an in-memory file system.

This package provides a Flask application that exposes one
``FileSystem`` over HTTP.  It is an **optional** extra — install with::

    pip install py-memfs[web]

The ``create_app`` factory in ``app.py`` wires the endpoints; see its
module docstring for the route table.
"""
