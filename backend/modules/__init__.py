"""
Feature modules for the Citizone backend.

- users: the User record and the credential store
- auth: email and phone authentication, one-time codes, session tokens

Each module keeps its interfaces, models, exceptions and implementation
side by side. Modules communicate through interfaces, not concrete
implementations.
"""
