"""Core IR, native file records, model accessors, and file I/O.

WHY: The core package holds what both conversion directions share —
the canonical model dataclasses, the native file record and naming rules,
the version-independent accessor layer, and the recursive merge.

HOW: ir.py defines the canonical model, native.py the Dialogflow file
records and path conventions, accessor.py the v3/v4 dispatch, merge.py
the override merge, files.py reading and writing agent directories.

RULES:
- IR dataclasses are the contract between the adapters — change with care
- Nothing in core knows the Dialogflow default values (see adapters.defaults)
- Only files.py touches the file system
"""
