"""Command groups for the Bookshelf CLI"""
