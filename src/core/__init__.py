"""Core domain package for phonefwd.

Core contains the forwarding trie and the forward/reverse lookups without any
console or configuration code, keeping the data structure portable.
"""
