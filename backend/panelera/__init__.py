"""Panelera - panela production analytics backend"""
