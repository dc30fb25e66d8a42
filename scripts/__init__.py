# scripts: 命令行入口脚本，通过 python -m scripts.xxx 运行
