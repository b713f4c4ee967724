"""Utility modules for OpenShelf"""
