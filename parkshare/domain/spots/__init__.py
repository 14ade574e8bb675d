"""Spots domain - parking spot store, reads and change feed"""
