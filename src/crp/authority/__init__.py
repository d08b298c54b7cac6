"""Authority directory."""

from crp.authority.directory import DIRECTORY, AuthorityEntry, department_email, lookup

__all__ = ["DIRECTORY", "AuthorityEntry", "department_email", "lookup"]
