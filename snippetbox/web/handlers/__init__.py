"""Route handlers"""
