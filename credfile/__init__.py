"""
credfile - File-backed credential store

Serves username/password-hash verification from a flat users file and keeps
the in-memory view current while the file changes on disk.

Architecture:
- Each module is self-contained with clear interfaces
- Modules are completely replaceable
- No module knows the internals of another
- All communication through defined interfaces

Modules:
- hasher: Password hash verification and generation
- validation: Username rules
- users: Snapshot parsing, persistence, verification and hot-reload
- watcher: Filesystem change notifications
"""

__version__ = "1.0.0"
