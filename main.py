"""kbfirst - knowledge-base-first question answering

Simple CLI for asking a question or crawling the web for a query.
"""

import argparse
import asyncio
import json
import sys

import httpx

from kbfirst.handler import answer_question, crawl_web, parse_answer_request, parse_crawl_request
from kbfirst.tools.page_fetcher import PageFetchError
from kbfirst.tools.search_provider import SearchError


async def run(args: argparse.Namespace) -> int:
    arguments = {"site": args.site, "maxChars": args.max_chars}
    if args.top_k is not None:
        arguments["topK"] = args.top_k
    if args.recency_days is not None:
        arguments["recencyDays"] = args.recency_days

    if args.crawl:
        request = parse_crawl_request({"arguments": {"query": args.crawl, **arguments}})
        print(f"Crawl query: {request.query}", file=sys.stderr)
        try:
            result = await crawl_web(request)
        except (LookupError, ValueError, SearchError, PageFetchError, httpx.HTTPError) as e:
            print(f"[!] Error: {e}", file=sys.stderr)
            return 1
    else:
        request = parse_answer_request({"arguments": {"question": args.question, **arguments}})
        print(f"Question: {request.question}", file=sys.stderr)
        result = await answer_question(request)
        print(f"[*] Answered via {result['method']} ({result['reason']})", file=sys.stderr)

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


def main():
    parser = argparse.ArgumentParser(description="kbfirst question answering")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--question", "-q", help="Question to answer (knowledge base first)")
    target.add_argument("--crawl", "-c", help="Search query to crawl directly")
    parser.add_argument("--top-k", type=int, help="Search results to request (max 10)")
    parser.add_argument("--recency-days", type=int, help="Prefer results from the last N days")
    parser.add_argument("--site", help="Restrict search to a site, e.g. nodejs.org")
    parser.add_argument("--max-chars", type=int, help="Clamp extracted page text")

    args = parser.parse_args()

    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
