"""CLI commands for querying a GitLab instance."""

import argparse
import json
import logging
import sys


def _dump(value):
    """Print a model, a list of models, or None as JSON."""
    if isinstance(value, list):
        data = [v.model_dump(mode="json") for v in value]
    elif value is None:
        data = None
    else:
        data = value.model_dump(mode="json")
    json.dump(data, sys.stdout, indent=2)
    sys.stdout.write("\n")


def _add_paging(parser):
    parser.add_argument("--page", type=int, default=None, help="Page to fetch (1-based)")
    parser.add_argument("--per-page", type=int, default=None, help="Items per page (max 100)")


def _print_paging(resp):
    if resp.total_pages or resp.next_page:
        print(
            f"page {resp.current_page}/{resp.total_pages or '?'}, next: {resp.next_page or '-'}",
            file=sys.stderr,
        )


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Query the GitLab REST API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--url",
        default=None,
        help="GitLab URL (default: GITLAB_URL or https://gitlab.com/api/v4/)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every request",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("current-user", help="Show the authenticated user")

    get_user_parser = subparsers.add_parser("get-user", help="Show a single user")
    get_user_parser.add_argument("user", type=int, help="User ID")

    list_users_parser = subparsers.add_parser("list-users", help="List users")
    list_users_parser.add_argument("--search", default=None, help="Filter by name, username or email")
    _add_paging(list_users_parser)

    list_commits_parser = subparsers.add_parser("list-commits", help="List repository commits")
    list_commits_parser.add_argument("project", help="Project ID or namespace/path")
    list_commits_parser.add_argument("--ref-name", default=None, help="Branch or tag (default: default branch)")
    _add_paging(list_commits_parser)

    get_commit_parser = subparsers.add_parser("get-commit", help="Show a single commit")
    get_commit_parser.add_argument("project", help="Project ID or namespace/path")
    get_commit_parser.add_argument("sha", help="Commit SHA, branch or tag")

    block_parser = subparsers.add_parser("block-user", help="Block a user (admin only)")
    block_parser.add_argument("user", type=int, help="User ID")

    unblock_parser = subparsers.add_parser("unblock-user", help="Unblock a user (admin only)")
    unblock_parser.add_argument("user", type=int, help="User ID")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    from .client import GitLabClient
    from .errors import GitLabError

    with GitLabClient(base_url=args.url) as gl:
        try:
            if args.command == "current-user":
                user, _ = gl.users.current_user()
                _dump(user)
            elif args.command == "get-user":
                user, _ = gl.users.get_user(args.user)
                _dump(user)
            elif args.command == "list-users":
                from .users import ListUsersOptions

                opt = ListUsersOptions(page=args.page, per_page=args.per_page, search=args.search)
                users, resp = gl.users.list_users(opt)
                _dump(users)
                _print_paging(resp)
            elif args.command == "list-commits":
                from .commits import ListCommitsOptions

                opt = ListCommitsOptions(page=args.page, per_page=args.per_page, ref_name=args.ref_name)
                commits, resp = gl.commits.list_commits(_project_arg(args.project), opt)
                _dump(commits)
                _print_paging(resp)
            elif args.command == "get-commit":
                commit, _ = gl.commits.get_commit(_project_arg(args.project), args.sha)
                _dump(commit)
            elif args.command == "block-user":
                gl.users.block_user(args.user)
                print(f"Blocked user {args.user}")
            elif args.command == "unblock-user":
                gl.users.unblock_user(args.user)
                print(f"Unblocked user {args.user}")
        except GitLabError as e:
            print(f"error: {e}", file=sys.stderr)
            return 1
    return 0


def _project_arg(value: str) -> int | str:
    """Numeric project arguments are IDs, anything else is a path."""
    return int(value) if value.isdigit() else value


if __name__ == "__main__":
    sys.exit(main())
