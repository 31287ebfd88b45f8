import argparse
import asyncio
import json
import logging

from colorama import init, Fore, Style

import config
from signal_service import SignalService

VIEWS = (
    'majors',
    'trending_low_risk',
    'top_volume',
    'high_liquidity',
    'boosted',
    'whale_alert',
    'smart_money',
    'hot_buys',
    'risky',
    'signal_plus',
    'all_signals',
    'performance_history',
)

# Initialize colorama
init(autoreset=True)


def setup_logging(level: str):
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )


async def run_view(service: SignalService, args) -> dict:
    if args.token:
        return await service.token_detail(args.token, args.tf)
    if args.search:
        return await service.search(args.search)

    view = args.view
    if view == 'performance_history':
        return await service.performance_history()
    if view in ('signal_plus', 'all_signals'):
        return await getattr(service, f"list_{view}")(args.tf, args.potential)
    if view in ('top_volume', 'high_liquidity', 'boosted', 'risky'):
        return await getattr(service, f"list_{view}")()
    return await getattr(service, f"list_{view}")(args.tf)


def risk_color(label: str) -> str:
    if label == "LOW":
        return Fore.GREEN
    if label == "MED":
        return Fore.YELLOW
    return Fore.RED


def print_item(item: dict):
    ident = item.get('ident') or {}
    pair = item.get('bestPair') or {}
    risk = item.get('risk') or {}
    potential = item.get('potential') or {}

    name = f"{ident.get('name', 'Token')} ({ident.get('symbol', '')})"
    liq = (pair.get('liquidity') or {}).get('usd') or 0
    mc = pair.get('marketCap') or 0
    label = risk.get('riskLabel', '?')

    line = (
        f"{Fore.WHITE}{name:<32} "
        f"{Fore.YELLOW}MC ${mc:>14,.0f} LIQ ${liq:>12,.0f} "
        f"{risk_color(label)}RISK {label}/{risk.get('riskScore', '?')}"
    )
    if potential:
        line += f" {Fore.CYAN}POT {potential.get('potential')}"
    if item.get('showBuy'):
        line += f" {Fore.GREEN}{Style.BRIGHT}BUY"
    if item.get('sources'):
        line += f" {Fore.MAGENTA}[{', '.join(item['sources'])}]"
    print(line)


def print_history_entry(entry: dict):
    color = Fore.GREEN if entry.get('roiPct', 0) > 0 else Fore.WHITE
    if entry.get('status') == 'removed':
        color = Fore.RED
    print(
        f"{Fore.WHITE}{entry.get('name')} ({entry.get('symbol')}) {Fore.MAGENTA}{entry.get('source')} "
        f"{Fore.YELLOW}entry ${entry.get('entryMc', 0):,.0f} peak ${entry.get('peakMc', 0):,.0f} "
        f"{color}{entry.get('roiX', 0)}x ({entry.get('roiPct', 0)}%) {entry.get('status')}"
    )


def print_result(title: str, result: dict):
    print(f"\n{Fore.CYAN}{'=' * 50}")
    print(f"{Fore.CYAN}{title} ({result.get('count', 0)} items)")
    print(f"{Fore.CYAN}{'=' * 50}")
    for item in result.get('items', []):
        if 'entryMc' in item:
            print_history_entry(item)
        else:
            print_item(item)


def print_detail(result: dict):
    print_result(f"TOKEN {result.get('address')}", {'count': 1, 'items': [result]})
    for warning in result.get('warnings', []):
        color = {'ok': Fore.GREEN, 'warn': Fore.YELLOW}.get(warning.get('level'), Fore.RED)
        print(f"{color}- {warning.get('text')}")


async def main():
    parser = argparse.ArgumentParser(description="DexScreener signal pipeline")
    parser.add_argument("--view", choices=VIEWS, default='all_signals',
                        help="List view to build")
    parser.add_argument("--tf", default=config.DEFAULT_TIMEFRAME,
                        help="Timeframe: 5m, 10m, 15m, 1h, 4h, 1d")
    parser.add_argument("--potential", default=config.DEFAULT_POTENTIAL,
                        help="Signal+ potential tier: LOW, MED, HIGH")
    parser.add_argument("--token", help="Show detail for one token address")
    parser.add_argument("--search", help="Free-text pair search")
    parser.add_argument("--json", action="store_true", help="Print raw JSON")
    parser.add_argument("--watch", type=float, default=0,
                        help="Repeat every N seconds (lets smart-money streaks build)")
    args = parser.parse_args()

    setup_logging(config.LOG_LEVEL)

    async with SignalService.from_config() as service:
        while True:
            try:
                result = await run_view(service, args)
            except Exception as e:
                print(f"{Fore.RED}❌ {e}")
                if not args.watch:
                    raise SystemExit(1)
            else:
                if args.json:
                    print(json.dumps(result, indent=2))
                elif args.token:
                    print_detail(result)
                else:
                    print_result((args.search and f"SEARCH {args.search}") or args.view.upper(), result)

            if not args.watch:
                break
            await asyncio.sleep(args.watch)


def cli():
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print(f"\n{Fore.YELLOW}Stopped.")


if __name__ == "__main__":
    cli()
