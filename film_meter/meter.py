#!/usr/bin/env python3
"""
Film Meter — экспонометр и калькуляторы для плёночной съёмки.
Спот-замер по камере или фото, экспопара по EV, невзаимозаместимость,
температурная компенсация проявки, разведение химии.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import chemistry
import development
import reciprocity
from config import DEFAULT_TEMP, ExposureSettings, MeterState, PriorityMode, validate_calibration
from exposure import resolve_settings
from sampler import downsample
from scales import APERTURE_SCALE, ISO_SCALE, SHUTTER_SCALE, parse_shutter, require_member
from session import MeterReading, MeterSession
from sources import FrameSourceError, StillImageSource, VideoCaptureSource
from spot_meter import luma_to_ev, spot_luma, spot_region
from zones import zone_histogram


def build_settings(args) -> ExposureSettings:
    """Настройки экспозиции из аргументов; задана выдержка → режим Tv."""
    settings = ExposureSettings(iso=require_member(ISO_SCALE, args.iso, "ISO"))
    if args.shutter is not None:
        settings.priority_mode = PriorityMode.SHUTTER_FIXED
        settings.fixed_shutter = require_member(SHUTTER_SCALE, parse_shutter(args.shutter), "Shutter")
    else:
        settings.fixed_aperture = require_member(APERTURE_SCALE, args.aperture, "Aperture")
    return settings


def format_reading(reading: MeterReading) -> str:
    lock = " 🔒" if reading.state is MeterState.LOCKED else ""
    return f"EV {reading.ev:5.1f}  →  {reading.label}{lock}"


def cmd_spot(args) -> int:
    """Замер по неподвижному изображению: один кадр, без сглаживания."""
    settings = build_settings(args)
    source = StillImageSource(args.image)
    try:
        buffer = downsample(source.read())
    finally:
        source.release()

    luma = spot_luma(buffer, spot_region(buffer.shape[1], buffer.shape[0]))
    ev = luma_to_ev(luma, validate_calibration(args.offset))
    _, label = resolve_settings(ev, settings)

    print(f"\n📷 {args.image.name}")
    print(f"  💡 Яркость спота: {luma:.1f}")
    print(f"  📏 EV {ev:.1f} @ ISO {settings.iso}  →  {label}")
    if args.zones:
        for zone, share in zone_histogram(buffer).items():
            if share > 0:
                print(f"     Зона {zone:>3}: {share:6.1%}")
    return 0


def cmd_live(args) -> int:
    """Живой замер с камеры до Ctrl+C или --ticks."""
    settings = build_settings(args)
    source = VideoCaptureSource(args.device)
    every = max(1, args.print_every)

    def show(reading: MeterReading):
        if session.ticks % every == 0:
            print(f"  {format_reading(reading)}")

    session = MeterSession(source, settings=settings, on_reading=show, show_zones=args.zones)
    session.set_calibration_offset(args.offset)

    print(f"\n🎥 Замер с устройства {args.device} (Ctrl+C — стоп)")
    try:
        asyncio.run(session.run(max_ticks=args.ticks))
    except KeyboardInterrupt:
        session.request_stop()
        source.release()
    print(f"  ✅ Итог: EV {session.estimate.smoothed:.1f} за {session.ticks} кадров")
    return 0


def cmd_reciprocity(args) -> int:
    if args.p is not None:
        name, exponent = f"p={args.p}", args.p
    else:
        stock = reciprocity.find_stock(args.film)
        name, exponent = stock.name, stock.exponent

    actual = reciprocity.compensate(args.time, exponent)
    delta = actual - args.time
    print(f"\n🎞️  {name}")
    print(f"  ⏱️  Замер: {reciprocity.format_duration(args.time)}")
    print(f"  ⏳ Реально: {reciprocity.format_duration(actual)} (+{delta:.1f}s)")
    return 0


def cmd_develop(args) -> int:
    recipe = development.find_recipe(args.recipe)
    temp = args.temp if args.temp is not None else recipe.temp
    adjusted = development.compensate_recipe(recipe, temp)

    print(f"\n🧪 {recipe.name} @ {temp:.1f}°C (эталон {recipe.temp:.1f}°C)")
    for base, step in zip(recipe.steps, adjusted.steps):
        mark = "  *" if step.duration != base.duration else ""
        print(f"  {step.name:<10} {development.format_clock(step.duration)}{mark}")
    return 0


def cmd_dilute(args) -> int:
    concentrate, water = chemistry.compute(args.volume, args.ratio)
    print(f"\n⚗️  {args.volume:g} мл, {chemistry.format_ratio(args.ratio)}")
    print(f"  Концентрат: {concentrate:.1f} мл")
    print(f"  Вода:       {water:.1f} мл")
    return 0


def _add_exposure_args(p: argparse.ArgumentParser):
    p.add_argument("--iso", type=int, default=400, help="ISO (default: 400)")
    group = p.add_mutually_exclusive_group()
    group.add_argument("--aperture", "-a", type=float, default=2.8,
                       help="Фиксированная диафрагма, режим Av (default: 2.8)")
    group.add_argument("--shutter", "-s", default=None,
                       help="Фиксированная выдержка, режим Tv (например 1/60)")
    p.add_argument("--offset", type=float, default=0.0,
                   help="Калибровка EV, от -5 до +5 шагом 0.5")
    p.add_argument("--zones", action="store_true", help="Зонная система")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Film Meter — экспонометр и калькуляторы для плёнки"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Подробный лог")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("spot", help="Замер по фотографии")
    p.add_argument("image", type=Path, help="Файл изображения")
    _add_exposure_args(p)
    p.set_defaults(func=cmd_spot)

    p = sub.add_parser("live", help="Живой замер с камеры")
    p.add_argument("--device", type=int, default=0, help="Индекс камеры (default: 0)")
    p.add_argument("--ticks", type=int, default=None, help="Остановиться после N тиков")
    p.add_argument("--print-every", type=int, default=30,
                   help="Печатать каждый N-й замер (default: 30)")
    _add_exposure_args(p)
    p.set_defaults(func=cmd_live)

    p = sub.add_parser("reciprocity", help="Поправка на невзаимозаместимость")
    p.add_argument("--time", "-t", type=float, required=True, help="Замер, секунды")
    p.add_argument("--film", default=reciprocity.FILM_STOCKS[0].name,
                   help="Плёнка (default: Kodak Portra 400)")
    p.add_argument("--p", type=float, default=None, help="Свой показатель Шварцшильда")
    p.set_defaults(func=cmd_reciprocity)

    p = sub.add_parser("develop", help="Время проявки при другой температуре")
    p.add_argument("--recipe", default=development.RECIPES[0].id,
                   choices=[r.id for r in development.RECIPES])
    p.add_argument("--temp", type=float, default=None,
                   help=f"Температура °C (default: эталон рецепта, обычно {DEFAULT_TEMP:g})")
    p.set_defaults(func=cmd_develop)

    p = sub.add_parser("dilute", help="Разведение 1:N")
    p.add_argument("--volume", type=float, default=500, help="Общий объём, мл (default: 500)")
    p.add_argument("--ratio", type=float, default=25, help="Частей воды (default: 25)")
    p.set_defaults(func=cmd_dilute)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG,
                            format="%(asctime)s %(name)s %(levelname)s: %(message)s")
    try:
        return args.func(args)
    except (ValueError, FrameSourceError) as e:
        print(f"❌ {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
