"""Apps - 命令行工具"""
