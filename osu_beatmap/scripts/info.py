from pathlib import Path
from multiprocessing import Pool
from typing import Optional

from tqdm import tqdm

import click

from osu_beatmap.beatmap import BeatmapInfo, parse_info_file

path_option_type = click.Path(exists=True, path_type=Path)

def find_maps(paths: tuple[Path, ...]) -> list[Path]:
    maps = []
    for p in paths:
        if p.is_dir():
            maps.extend(sorted(p.rglob("*.osu")))
        else:
            maps.append(p)
    return maps

def read_info(map_file: Path) -> Optional[BeatmapInfo]:
    try:
        return parse_info_file(map_file)
    except OSError as e:
        print(f"{map_file}: {e}")
        return None

def format_info(bm: BeatmapInfo) -> str:
    return " | ".join([
        f"{bm.artist} - {bm.title} [{bm.version}]",
        bm.mode.name.lower(),
        f"AR{bm.ar:g} CS{bm.cs:g} OD{bm.od:g} HP{bm.hp:g}",
        bm.filename,
    ])

@click.command()
@click.argument('paths', nargs=-1, required=True, type=path_option_type)
@click.option('--num-workers', type=click.IntRange(min=1), default=1, help='number of worker processes used to read beatmaps')
def info(paths: tuple[Path, ...], num_workers: int):
    """
    list the metadata and difficulty of `.osu` files.

    directories are searched recursively
    """
    map_files = find_maps(paths)
    if len(map_files) == 0:
        raise click.ClickException(f"no osu! beatmaps found in {', '.join(map(str, paths))}")

    if num_workers == 1:
        results = [ read_info(f) for f in tqdm(map_files, disable=len(map_files) < 2) ]
    else:
        with Pool(processes=num_workers) as p:
            results = list(tqdm(p.imap(read_info, map_files), total=len(map_files)))

    infos = [ bm for bm in results if bm is not None ]
    for bm in infos:
        print(format_info(bm))
    print(f"{len(infos)}/{len(map_files)} beatmaps read")
