"""
Token Reconciler - credential state machine for a usage-monitor add-on.

Decides, from a secure secret store and a legacy plaintext setting that
update independently and asynchronously, what the effective credential
state is, and which user-facing hint applies, without flapping while
writes propagate.
"""

__version__ = "0.1.0"
__author__ = "Token Reconciler Team"
