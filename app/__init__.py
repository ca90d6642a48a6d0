"""Collection runner and scrape server"""
