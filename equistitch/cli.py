"""
cli.py — Command line front end.

Usage:
    equistitch split  -i pano.jpg -c faces/ [-t tiles/ -p 480]
    equistitch stitch -i faces/ -o pano.jpg
    equistitch stitch -i tiles/ -o pano.jpg --tiles
"""

import sys
import argparse
import traceback

from .cube import DEFAULT_EXTENSION, Cube, read_image, write_image
from .tocubemap import default_face_size, equirect_to_cube
from .tosphere import cube_to_equirect

DEFAULT_PATCH_SIZE = 480


# ── Commands ──────────────────────────────────────────────────────────────────

def split(input_path: str, patch_size: int = DEFAULT_PATCH_SIZE,
          cubemap_dir: str | None = None, tiles_dir: str | None = None,
          extension: str = DEFAULT_EXTENSION) -> None:
    print("[main]: Load image … ", end='', flush=True)
    img_np = read_image(input_path)
    print("done")

    H, W = img_np.shape[:2]
    face_size = default_face_size(W)
    print(f"Source:     {W} × {H} px")
    print(f"Face size:  {face_size} × {face_size} px")

    print("[Equ -> Cube]: processing …")
    cube = equirect_to_cube(img_np, face_size, verbose=True)
    del img_np

    if cubemap_dir is None and tiles_dir is None:
        print("WARNING: no output type specified", file=sys.stderr)
    if cubemap_dir is not None:
        print(f"[main]: Saving cubemap → {cubemap_dir} … ", end='', flush=True)
        cube.save(cubemap_dir, extension)
        print("done")
    if tiles_dir is not None:
        print(f"[main]: Saving {patch_size} px tiles → {tiles_dir} … ", end='', flush=True)
        cube.save_patches(tiles_dir, patch_size, extension)
        print("done")


def stitch(input_dir: str, output_path: str, tiles: bool = False,
           extension: str = DEFAULT_EXTENSION) -> None:
    if tiles:
        print(f"[main]: Loading cube from tiles in {input_dir} … ", end='', flush=True)
        cube = Cube.from_directory_of_patches(input_dir, extension)
    else:
        print(f"[main]: Loading cube from faces in {input_dir} … ", end='', flush=True)
        cube = Cube.from_directory(input_dir, extension)
    print("done")

    print("[Cube -> Equ]: converting … ", end='', flush=True)
    result_np = cube_to_equirect(cube)
    del cube
    print("done")
    print(f"Output size: {result_np.shape[1]} × {result_np.shape[0]} px")

    print(f"[main]: Saving → {output_path} … ", end='', flush=True)
    write_image(output_path, result_np)
    print("done")


# ── CLI ───────────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='equistitch',
        description='Utility for manipulating 360-degree equirectangular images.',
    )
    commands = parser.add_subparsers(dest='command')

    p_split = commands.add_parser(
        'split',
        help='Split an equirectangular image into cube faces and/or tiles',
    )
    p_split.add_argument('-i', '--input', required=True, metavar='FILE',
                         help='Equirectangular input image')
    p_split.add_argument('-p', '--patch-size', type=int, default=DEFAULT_PATCH_SIZE,
                         help=f'Tile edge in pixels (default: {DEFAULT_PATCH_SIZE})')
    p_split.add_argument('-c', '--cubemap-faces-output', metavar='CUBEMAP_OUTPUT',
                         help='Output directory for cube faces')
    p_split.add_argument('-t', '--tiles-output', metavar='TILES_OUTPUT',
                         help='Output directory for tiles')
    p_split.add_argument('-e', '--extension', default=DEFAULT_EXTENSION,
                         help=f'Output file extension (default: {DEFAULT_EXTENSION})')

    p_stitch = commands.add_parser(
        'stitch',
        help='Stitch cube faces or tiles back into an equirectangular image',
    )
    p_stitch.add_argument('-i', '--input-dir', required=True, metavar='INPUT_DIR',
                          help='Directory holding cube faces or tiles')
    p_stitch.add_argument('-o', '--output', required=True, metavar='OUTPUT',
                          help='Equirectangular output image')
    p_stitch.add_argument('-t', '--tiles', action='store_true',
                          help='Input directory holds tiles instead of whole faces')
    p_stitch.add_argument('-e', '--extension', default=DEFAULT_EXTENSION,
                          help=f'Input file extension (default: {DEFAULT_EXTENSION})')
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    try:
        if args.command == 'split':
            split(args.input, args.patch_size, args.cubemap_faces_output,
                  args.tiles_output, args.extension)
        else:
            stitch(args.input_dir, args.output, args.tiles, args.extension)
    except Exception as exc:
        print(f"\nERROR: {args.command} failed: {exc}", file=sys.stderr)
        traceback.print_exc()
        sys.exit(1)

    sys.exit(0)


if __name__ == '__main__':
    main()
