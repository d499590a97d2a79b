import sys

from infra.llm.cost_estimator import CostEstimator


def cmd_estimate_tokens(args):
    text = args.text if args.text != '-' else sys.stdin.read()
    breakdown = CostEstimator().breakdown(text, has_media_attachment=args.media)

    if args.quiet:
        print(breakdown['total'])
        return 0

    print("Token breakdown:")
    print(f"  Characters: {breakdown['chars']} (~{breakdown['char_tokens']} tokens)")
    print(f"  Words: {breakdown['words']} (~{breakdown['word_tokens']} tokens)")
    print(f"  Text: ~{breakdown['text_tokens']} tokens")
    if args.media:
        print(f"  Image: ~{breakdown['media_tokens']} tokens")
    print(f"  Total estimated: {breakdown['total']} tokens")
    return 0


def setup_parser(subparsers):
    tokens_parser = subparsers.add_parser(
        'estimate-tokens',
        help='Estimate the token cost of a prompt'
    )
    tokens_parser.add_argument('text', help="Prompt text ('-' reads stdin)")
    tokens_parser.add_argument('--media', action='store_true', help='Add the cost of one attached image')
    tokens_parser.add_argument('-q', '--quiet', action='store_true', help='Print only the total')
    tokens_parser.set_defaults(func=cmd_estimate_tokens)
