"""Terminal adapters and key decoding.

Prompts read keys and write text through the Terminal abstraction so they
never bind directly to sys.stdin/sys.stdout or a particular platform.
"""
