"""
proctree 公共基础模块：配置、枚举、异常与日志
"""
