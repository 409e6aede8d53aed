"""Lifecycle hook handlers.

One module per event (``session_start``, ``user_prompt_submit``,
``pre_tool_use``, ``post_tool_use``), routed by ``dispatcher``.  Each
invocation is a fresh process: all state shared between invocations lives in
files under the configured base directory.
"""
