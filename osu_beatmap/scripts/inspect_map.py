from pathlib import Path

import click

from osu_beatmap.beatmap import parse_file
from osu_beatmap.hit_objects import SliderData
from osu_beatmap.sliders import compute_path, path_length, slider_end_position
from osu_beatmap.timing import slider_duration
from osu_beatmap.difficulty import calculate_preempt, calculate_fade_in, calculate_radius

file_option_type = click.Path(exists=True, dir_okay=False, path_type=Path)

@click.command()
@click.argument('map-file', type=file_option_type)
@click.option('--sort-timing-points', is_flag=True, help='order timing points by time (uninherited first) before resolving beat lengths')
@click.option('--timing-points', 'num_timing_points', type=click.IntRange(min=0), default=5, help='number of timing points to show')
@click.option('--sliders', 'num_sliders', type=click.IntRange(min=0), default=5, help='number of slider paths to compute and show')
def inspect(map_file: Path, sort_timing_points: bool, num_timing_points: int, num_sliders: int):
    """parse an `.osu` file and summarize its contents."""

    bm = parse_file(map_file, sort_timing_points=sort_timing_points)

    print(f"{bm.artist} - {bm.title} [{bm.version}] by {bm.creator}")
    print(f"format v{bm.format_version}, {bm.mode.name.lower()}")
    print(f"AR{bm.ar:g} CS{bm.cs:g} OD{bm.od:g} HP{bm.hp:g} SV{bm.sv:g} tick rate {bm.tick_rate:g}")
    preempt = calculate_preempt(bm.ar)
    print(f"preempt {preempt:.0f}ms, fade in {calculate_fade_in(preempt):.0f}ms, radius {calculate_radius(bm.cs):.1f}px")
    print(
        f"{len(bm.objects)} objects: "
        f"{bm.circle_count} circles, {bm.slider_count} sliders, "
        f"{bm.spinner_count} spinners, {bm.hold_count} holds"
    )

    print(f"{len(bm.timing_points)} timing points")
    for tp in bm.timing_points[:num_timing_points]:
        print(f"  {tp!r}")

    sliders = [ ho for ho in bm.objects if isinstance(ho.data, SliderData) ]
    for ho in sliders[:num_sliders]:
        path = compute_path(ho.data)
        x, y = slider_end_position(ho.data)
        print(" ".join([
            f"  {ho!r}",
            f"path={len(path)}pts/{path_length(path):.1f}px",
            f"end=({x:.1f},{y:.1f})",
            f"duration={slider_duration(bm, ho):.0f}ms",
        ]))
