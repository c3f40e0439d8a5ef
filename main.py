#!/usr/bin/env python3
"""
Workout Plan Generator
Main entry point for the application.
"""

import argparse
import json
import logging
import os
import sys

from dotenv import load_dotenv

from workout_planner.config import load_config
from workout_planner.errors import PlanGenerationError, ProviderError
from workout_planner.fallback_plan import generate_fallback_plan
from workout_planner.input_handler import sanitize_request
from workout_planner.llm_client import AnthropicPlanClient
from workout_planner.models import default_questionnaire_data
from workout_planner.output import plan_to_markdown, save_plan
from workout_planner.plan_generator import PlanGenerator
from workout_planner.progress import stream_generation


def print_banner():
    """Print welcome banner."""
    banner = """
╔══════════════════════════════════════════════════════════════╗
║                                                              ║
║        WORKOUT PLAN GENERATOR                                ║
║        Powered by Claude AI                                  ║
║                                                              ║
╚══════════════════════════════════════════════════════════════╝
    """
    print(banner)


def print_section(title):
    print("\n" + "=" * 60)
    print(title)
    print("=" * 60)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Generate a personalised workout plan.")
    parser.add_argument("questionnaire", nargs="?", help="Path to a questionnaire JSON file")
    parser.add_argument("--existing-plan", help="Path to an existing plan to update")
    parser.add_argument(
        "--config",
        default=os.path.join(os.path.dirname(__file__), "config.yaml"),
        help="Path to config.yaml",
    )
    parser.add_argument("--example", action="store_true", help="Use the built-in example questionnaire")
    parser.add_argument("--stream", action="store_true", help="Print progress events while generating")
    parser.add_argument("--fallback", action="store_true", help="Build the template plan without calling the AI")
    parser.add_argument(
        "--fallback-on-error",
        action="store_true",
        help="Use the template plan if the AI service fails",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def load_request(args):
    """Read the request body from the questionnaire file or the built-in example."""
    if args.example:
        body = {"questionnaire": default_questionnaire_data()}
    elif args.questionnaire:
        with open(args.questionnaire, "r") as f:
            body = json.load(f)
    else:
        print("Error: pass a questionnaire JSON file or --example.")
        sys.exit(1)

    if args.existing_plan:
        with open(args.existing_plan, "r") as f:
            existing = f.read()
        if "questionnaire" not in body:
            body = {"questionnaire": body}
        body["existingPlan"] = existing
    return body


def generate_streaming(generator, questionnaire, existing_plan, interval):
    """Print progress events and return the final result event."""
    for event in stream_generation(questionnaire, generator, existing_plan, interval=interval):
        if event["type"] == "progress":
            print(f"  [{event['progress']:3d}%] {event['message']}")
        else:
            return event
    return None


def main(argv=None):
    """Main application flow."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    print_banner()

    # Load environment variables
    load_dotenv()

    # Load configuration
    print("Loading configuration...")
    try:
        config = load_config(args.config)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        sys.exit(1)

    try:
        questionnaire, existing_plan = sanitize_request(load_request(args))
    except PlanGenerationError as e:
        print(f"\n❌ Invalid questionnaire: {e.message}")
        sys.exit(1)

    api_key_env = config["claude"]["api_key_env"]
    api_key = os.getenv(api_key_env)
    use_fallback = args.fallback

    if not api_key and not use_fallback:
        print(f"\n⚠ {api_key_env} not found in environment variables.")
        print("\nTo generate with Claude:")
        print("1. Copy .env.example to .env")
        print("2. Add your Anthropic API key to .env")
        print("3. Get your API key from: https://console.anthropic.com/")
        print("\nBuilding the template plan instead.")
        use_fallback = True

    print_section("GENERATING WORKOUT PLAN")

    quality_report = None
    warnings = []
    if use_fallback:
        plan = generate_fallback_plan(questionnaire)
    else:
        generator = PlanGenerator(AnthropicPlanClient(api_key=api_key, config=config), config)
        try:
            if args.stream:
                event = generate_streaming(
                    generator, questionnaire, existing_plan, config["generation"]["progress_interval"]
                )
                if event["type"] == "error":
                    error = event["error"]
                    raise ProviderError(error["message"], code=error["code"])
                plan = event["plan"]
                quality_report = event["qualityReport"]
                warnings = event["warnings"]
            else:
                result = generator.generate(questionnaire, existing_plan)
                plan = result.plan
                quality_report = result.quality_report
                warnings = result.warnings
        except PlanGenerationError as e:
            print(f"\n❌ {e.message} ({e.code})")
            if not args.fallback_on_error:
                sys.exit(1)
            plan = generate_fallback_plan(questionnaire, reason=e.code)

    print_section("YOUR WORKOUT PLAN")
    print("\n" + plan_to_markdown(plan))

    if quality_report:
        print(
            f"Quality: {quality_report['finalStatus']} "
            f"after {quality_report['totalAttempts']} attempt(s)."
        )
    for warning in warnings:
        print(f"⚠ {warning}")

    filepath = save_plan(
        plan,
        output_folder=config["output"]["folder"],
        format=config["output"]["format"],
    )

    print_section("✓ ALL DONE!")
    print(f"\nYour workout plan was saved to: {filepath}")
    print("\nGood luck with your training! 💪\n")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n\nExiting...")
        sys.exit(0)
    except Exception as e:
        print(f"\n❌ Unexpected error: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)
