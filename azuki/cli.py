"""
azuki 命令行工具
"""

import argparse
import sys


def _build_engine(args):
    from azuki.engine import EngineConfig, create_engine
    config = EngineConfig.from_env()
    if args.dictionary:
        config.dictionary_path = args.dictionary
    return create_engine(config)


def _print_segments(segments):
    for i, seg in enumerate(segments):
        print(f"  [{i}] {seg.reading} ({seg.start}+{seg.length}): {' / '.join(seg.candidates)}")


def main():
    """命令行入口"""
    parser = argparse.ArgumentParser(
        prog="azuki",
        description="azuki - 日语假名汉字转换引擎",
    )

    subparsers = parser.add_subparsers(dest="command", help="可用命令")

    server_parser = subparsers.add_parser("server", help="启动 HTTP API 服务")
    server_parser.add_argument("--host", default="127.0.0.1", help="绑定地址 (默认: 127.0.0.1)")
    server_parser.add_argument("--port", type=int, default=3000, help="端口 (默认: 3000)")

    subparsers.add_parser("stdio", help="启动 stdio 服务（长度前缀 JSON）")

    convert_parser = subparsers.add_parser("convert", help="转换读音")
    convert_parser.add_argument("reading", help="平假名读音")
    convert_parser.add_argument("-c", "--context", default="", help="上下文")
    convert_parser.add_argument("-d", "--dictionary", default=None, help="SKK 词典路径")

    adjust_parser = subparsers.add_parser("adjust", help="调整分节边界")
    adjust_parser.add_argument("reading", help="平假名读音")
    adjust_parser.add_argument("index", type=int, help="分节下标（0 起）")
    adjust_parser.add_argument("direction", choices=["shrink", "extend"], help="移动方向")
    adjust_parser.add_argument("-d", "--dictionary", default=None, help="SKK 词典路径")

    subparsers.add_parser("version", help="显示版本")

    args = parser.parse_args()

    if args.command == "server":
        from azuki.api.server import main as server_main
        import os
        os.environ["HOST"] = args.host
        os.environ["PORT"] = str(args.port)
        server_main()

    elif args.command == "stdio":
        from azuki.server.main import main as stdio_main
        sys.exit(stdio_main())

    elif args.command == "convert":
        engine = _build_engine(args)
        result = engine.convert(args.reading, args.context or None)
        for i, candidate in enumerate(result.combined_candidates, 1):
            print(f"{i}. {candidate}")
        _print_segments(result.segments)

    elif args.command == "adjust":
        from azuki.engine import parse_direction
        engine = _build_engine(args)
        segments = engine.convert(args.reading).segments
        adjusted = engine.adjust_segment(args.reading, segments, args.index, parse_direction(args.direction))
        _print_segments(adjusted)

    elif args.command == "version":
        from azuki import __version__
        print(f"azuki v{__version__}")

    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
