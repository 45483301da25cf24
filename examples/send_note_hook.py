#!/usr/bin/env python3
"""
Send a GitLab note hook to a running lgtmbot.

Useful to try the bot without a GitLab instance: two runs against the same
merge request id make the bot call the merge endpoint.

Run with: python examples/send_note_hook.py --url http://localhost:8989/gitlab/hook --mr 42
"""

import argparse

import httpx

from lgtmbot.testing import create_note_payload


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--url", default="http://localhost:8989/gitlab/hook")
    parser.add_argument("--mr", type=int, default=42, help="merge request id")
    parser.add_argument("--project", type=int, default=7, help="project id")
    parser.add_argument("--note", default="LGTM")
    parser.add_argument("--user", default="reviewer")
    parser.add_argument("--token", help="X-Gitlab-Token header value")
    args = parser.parse_args()

    payload = create_note_payload(
        merge_request_id=args.mr,
        project_id=args.project,
        note=args.note,
        username=args.user,
    )
    headers = {"X-Gitlab-Token": args.token} if args.token else {}

    response = httpx.post(args.url, json=payload, headers=headers)
    print(f"{response.status_code} {response.text}")


if __name__ == "__main__":
    main()
