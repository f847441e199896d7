"""
Example scripts for the multisig SDK.

Run them as modules from the repository root::

    python -m examples.multisig

See examples.common for the environment variables they read.
"""
