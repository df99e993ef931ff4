import argparse
import sys

from kubectl_service_urls.cluster import ClusterAccessError, fetch_snapshot, load_client
from kubectl_service_urls.context import build_snapshot
from kubectl_service_urls.output import output_result
from kubectl_service_urls.resolver import compile_name_filter, resolve_namespace


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kubectl-service-urls",
        description="List the URLs through which each Service in a namespace and its Pods can be reached",
    )

    parser.add_argument("-n", "--namespace", help="Kubernetes namespace (default: default)")
    parser.add_argument("-k", "--kubeconfig", help="Path to kubeconfig file")
    parser.add_argument("--context", help="kubeconfig context to use")
    parser.add_argument(
        "-f", "--filter", dest="name_filter", help="Filter services by name (regex pattern)"
    )

    # Offline mode: read exported objects instead of talking to the cluster
    parser.add_argument("--services", help="Path to Services JSON (file or directory)")
    parser.add_argument("--endpoints", help="Path to Endpoints JSON (file or directory)")

    parser.add_argument(
        "--format",
        choices=["text", "json", "yaml"],
        default="text",
        help="Output format (text, json, yaml)",
    )
    parser.add_argument(
        "--request-timeout",
        type=float,
        default=None,
        help="Timeout in seconds for each Kubernetes API request",
    )
    parser.add_argument("--verbose", action="store_true")

    return parser


def _fail(message: str, code: int) -> int:
    print(f"[ERROR] {message}", file=sys.stderr)
    return code


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.endpoints and not args.services:
        parser.error("--endpoints requires --services")

    try:
        name_filter = compile_name_filter(args.name_filter)
    except ValueError as e:
        return _fail(str(e), 2)

    try:
        if args.services:
            snapshot = build_snapshot(
                args.services,
                args.endpoints,
                namespace=args.namespace,
                verbose=args.verbose,
            )
        else:
            v1 = load_client(args.kubeconfig, args.context)
            snapshot = fetch_snapshot(
                v1,
                args.namespace or "default",
                name_filter=name_filter,
                request_timeout=args.request_timeout,
                verbose=args.verbose,
            )
    except ClusterAccessError as e:
        return _fail(str(e), 1)
    except (OSError, KeyError, ValueError) as e:
        return _fail(f"Failed to load input: {e}", 1)

    reports = list(resolve_namespace(snapshot, name_filter))

    if args.verbose:
        print(
            f"[DEBUG] {len(reports)} of {len(snapshot.services)} services selected",
            file=sys.stderr,
        )
        print(f"[DEBUG] Services: {', '.join(snapshot.service_names)}", file=sys.stderr)

    output_result(snapshot.namespace, reports, args.format, args.name_filter)
    return 0


if __name__ == "__main__":
    sys.exit(main())
