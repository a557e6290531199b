"""Helpers for hashing, files, paths, keys, configuration and packs."""