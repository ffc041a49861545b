#!/usr/bin/env python3
import argparse
import time
from typing import List, Optional

from points_csv import format_assignment, read_points, write_assignment, write_points
from points_gen import DEFAULT_OFFSETS, gen_clustered_data
from lloyd import ASSIGN_BACKENDS, LloydParams, MAX_ITERS, kmeans_lloyd


def arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Lloyd k-means clustering")
    sub = ap.add_subparsers(dest="command", required=True)

    # kmeans_cli.py gen <N> <FILENAME>
    gen = sub.add_parser("gen", help="write N points around each default blob")
    gen.add_argument("n", type=int)
    gen.add_argument("file")
    gen.add_argument("--seed", type=int, default=None)

    # kmeans_cli.py cluster <FILENAME> <K>
    cl = sub.add_parser("cluster", help="cluster a CSV point file into K groups")
    cl.add_argument("file")
    cl.add_argument("k", type=int)
    cl.add_argument("-o", "--output", default=None)
    # Loop / parallelism controls
    cl.add_argument("--max_iters", type=int, default=MAX_ITERS)
    cl.add_argument("--workers", type=int, default=1)
    cl.add_argument("--chunk_size", type=int, default=4096)
    cl.add_argument("--backend", default="numpy", choices=list(ASSIGN_BACKENDS.keys()))
    cl.add_argument(
        "--device",
        default="auto",
        choices=["auto", "cpu", "cuda"]
    )
    cl.add_argument("--verbose", action="store_true")

    args = ap.parse_args(argv)
    args.parser = ap
    return args


def cmd_gen(args: argparse.Namespace) -> None:
    if args.n < 1:
        args.parser.error(f"N must be >= 1, got {args.n}")
    X = gen_clustered_data(DEFAULT_OFFSETS, args.n, seed=args.seed)
    write_points(args.file, X)
    print(f"[OK] points: {args.file} shape={X.shape}")


def cmd_cluster(args: argparse.Namespace) -> None:
    params = LloydParams(
        max_iters=args.max_iters,
        workers=args.workers,
        chunk_size=args.chunk_size,
        backend=args.backend,
        device=args.device,
        verbose=args.verbose
    )
    try:
        X = read_points(args.file)
        t0 = time.perf_counter()
        res = kmeans_lloyd(X, args.k, params)
        t_total = time.perf_counter() - t0
    except (ValueError, OSError) as e:
        args.parser.error(str(e))

    print(f"t_means: {res.timings.means_s:.4f}, t_ind: {res.timings.assign_s:.4f}")
    print(f"Clustered in {t_total:.4f}s")
    print(f"[Cluster] {res.state.value} after {res.iterations} iterations")
    print(format_assignment(res.assignment))
    if args.output:
        write_assignment(args.output, res.assignment)
        print(f"[OK] assignment: {args.output}")


def main(argv: Optional[List[str]] = None) -> None:
    args = arguments(argv)
    if args.command == "gen":
        cmd_gen(args)
    elif args.command == "cluster":
        cmd_cluster(args)


if __name__ == "__main__":
    main()
