"""hskime HTTP 接口"""
