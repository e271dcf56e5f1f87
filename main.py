import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Optional

from swap_parser import AppConfig, SolanaRPCError, SwapParser, SwapParserError, load_config
from swap_parser.report import SwapReport
from swap_parser.rpc import SolanaRPCClient


def new_logger(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    log = logging.getLogger("swap_parser")
    log.setLevel(level)
    log.handlers.clear()
    fmt = logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    logging.Formatter.converter = time.gmtime
    # stdout carries the JSON report
    stream = logging.StreamHandler(sys.stderr)
    stream.setFormatter(fmt)
    log.addHandler(stream)
    if log_file:
        fh = logging.FileHandler(log_file)
        fh.setFormatter(fmt)
        log.addHandler(fh)
    return log


def run_pipeline(config: AppConfig, signature: str) -> str:
    rpc_client = SolanaRPCClient(config.rpc)
    payload = rpc_client.get_transaction(signature)
    parser = SwapParser.from_rpc(payload)
    swaps, summary = parser.parse()
    report = SwapReport.build(swaps, summary, include_legs=config.include_legs)
    return SwapReport.to_json(report)


def main() -> int:
    parser = argparse.ArgumentParser(description="Decode the swap performed by a Solana transaction")
    parser.add_argument("signature", help="Transaction signature to fetch and decode")
    parser.add_argument("--config", type=Path, default=Path("parser.yaml"))
    parser.add_argument("--no-legs", action="store_true", help="Only print the consolidated summary")
    parser.add_argument("--output", type=Path, default=None, help="Optional path to write the report")
    args = parser.parse_args()

    config = load_config(args.config)
    if args.no_legs:
        config = AppConfig(rpc=config.rpc, log_level=config.log_level, log_file=config.log_file, include_legs=False)
    log = new_logger(config.log_level, config.log_file)

    try:
        report_text = run_pipeline(config, args.signature)
    except SwapParserError as exc:
        log.error("%s: %s", args.signature, exc)
        return 1
    except SolanaRPCError as exc:
        log.error("failed to fetch %s: %s", args.signature, exc)
        return 2

    if args.output:
        args.output.write_text(report_text, encoding="utf-8")
    else:
        print(report_text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
