"""
proctree 安装配置
"""
from setuptools import setup, find_packages

setup(
    name="proctree",
    version="1.0.0",
    description="进程树控制器：fork、信号级联、守护进程化",
    author="proctree Team",
    author_email="",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "loguru>=0.7",
        "pydantic>=2.0",
        "pydantic-settings>=2.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
)
