# adapters/__init__.py

"""
Driven adapters implementing the domain ports.
"""
