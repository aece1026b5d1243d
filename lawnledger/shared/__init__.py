"""Shared helpers - dates, validation and HTTP responses"""
