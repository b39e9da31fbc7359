"""
hskime 命令行工具
"""

import argparse
import asyncio
import sys

from hskime.engine import DictionaryConfig, create_service, fetch_hanzi_suggestions


def _build_config(args) -> DictionaryConfig:
    config = DictionaryConfig.from_env()
    if args.data_dir:
        config.data_dir = args.data_dir
    if args.data_url:
        config.data_url = args.data_url
    return config


def _format_result(index: int, result) -> str:
    meaning = "; ".join(result.meaning)
    if result.score is not None:
        return f"{index}. {result.word} [{result.pinyin}] {meaning} ({result.score})"
    return f"{index}. {result.word} [{result.pinyin}] {meaning} ({result.match_type.value})"


async def _run_query(args) -> int:
    service = create_service(_build_config(args))
    try:
        if args.command == "suggest":
            result = await fetch_hanzi_suggestions(args.pinyin, service)
            if result.error:
                print(f"查询失败: {result.error}", file=sys.stderr)
                return 1
            results = result.results
        else:
            results = await service.search_dictionary(args.query)

        if service.loader.table is None:
            print(f"词典加载失败: {service.loader.last_error}", file=sys.stderr)
            return 1
        if not results:
            print("无结果")
        for i, r in enumerate(results, 1):
            print(_format_result(i, r))
        return 0
    finally:
        await service.loader.source.aclose()


def main():
    """命令行入口"""
    parser = argparse.ArgumentParser(
        prog="hskime",
        description="hskime - HSK 拼音输入助手",
    )

    subparsers = parser.add_subparsers(dest="command", help="可用命令")

    # server 命令
    server_parser = subparsers.add_parser("server", help="启动 API 服务")
    server_parser.add_argument("--host", default="0.0.0.0", help="绑定地址 (默认: 0.0.0.0)")
    server_parser.add_argument("--port", type=int, default=3000, help="端口 (默认: 3000)")

    data_args = argparse.ArgumentParser(add_help=False)
    data_args.add_argument("--data-dir", default=None, help="HSK 词表目录")
    data_args.add_argument("--data-url", default=None, help="HSK 词表 HTTP 地址")

    # suggest 命令
    suggest_parser = subparsers.add_parser("suggest", parents=[data_args], help="拼音联想汉字")
    suggest_parser.add_argument("pinyin", help="拼音输入")

    # search 命令
    search_parser = subparsers.add_parser("search", parents=[data_args], help="词典搜索")
    search_parser.add_argument("query", help="搜索词（汉字 / 释义 / 拼音）")

    # version 命令
    subparsers.add_parser("version", help="显示版本")

    args = parser.parse_args()

    if args.command == "server":
        from hskime.api.server import main as server_main
        import os
        os.environ["HOST"] = args.host
        os.environ["PORT"] = str(args.port)
        server_main()

    elif args.command in ("suggest", "search"):
        sys.exit(asyncio.run(_run_query(args)))

    elif args.command == "version":
        from hskime import __version__
        print(f"hskime v{__version__}")

    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
