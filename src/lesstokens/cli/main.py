"""Main CLI entry point for LessTokens.

Commands:
    lesstokens compress <prompt> [options]
    lesstokens process <prompt> --model <model> [options]

SDK settings come from LESSTOKENS_API_KEY, LESSTOKENS_PROVIDER,
LESSTOKENS_BASE_URL and LESSTOKENS_TIMEOUT. The LLM key comes from
--llm-config or the provider's usual env var (OPENAI_API_KEY, ...).
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Any

import click
import yaml

from .. import __version__
from ..config import LessTokensConfig, LLMConfig, provider_api_key_from_env
from ..errors import LessTokensError
from ..sdk import LessTokensSDK
from ..types import CompressionOptions, Message, TokenUsage
from ..validation import coerce_llm_config


def run_async(coro: Any) -> Any:
    """Run an async coroutine synchronously."""
    return asyncio.run(coro)


def get_sdk() -> LessTokensSDK:
    """Create the SDK from environment variables."""
    return LessTokensSDK.from_config(LessTokensConfig.from_env())


def _read_prompt(prompt: str) -> str:
    if prompt == "-":
        return click.get_text_stream("stdin").read()
    return prompt


def _load_llm_config(
    path: str | None,
    provider: str,
    overrides: dict[str, Any],
) -> LLMConfig:
    """Build LLMConfig from an optional YAML file plus command-line overrides."""
    data: dict[str, Any] = {}
    if path:
        try:
            loaded = yaml.safe_load(Path(path).read_text())
        except yaml.YAMLError as e:
            raise click.ClickException(f"Invalid YAML in LLM config file: {e}") from None
        if loaded is not None and not isinstance(loaded, dict):
            raise click.ClickException("LLM config file must contain a mapping")
        data = loaded or {}

    data.update({key: value for key, value in overrides.items() if value is not None})
    if not data.get("api_key"):
        data["api_key"] = provider_api_key_from_env(provider)

    return coerce_llm_config(data)


def _format_usage(usage: TokenUsage) -> str:
    line = (
        f"Tokens: prompt={usage.prompt_tokens} completion={usage.completion_tokens} "
        f"total={usage.total_tokens}"
    )
    if usage.compressed_tokens is not None:
        line += f" compressed={usage.compressed_tokens} savings={usage.savings}%"
    return line


@click.group()
@click.version_option(version=__version__, prog_name="lesstokens")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """LessTokens - compress prompts before sending them to an LLM.

    \b
    Examples:
        lesstokens compress "Long prompt ..."
        lesstokens process "Long prompt ..." --model gpt-4o
        cat prompt.txt | lesstokens process - --model gpt-4o --stream
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# =============================================================================
# Compress Command
# =============================================================================


@cli.command()
@click.argument("prompt")
@click.option("--target-ratio", type=float, help="Target compression ratio (0.0 to 1.0)")
@click.option("--preserve-context/--no-preserve-context", default=None, help="Preserve context")
@click.option("--aggressive/--no-aggressive", default=None, help="Use aggressive compression")
@click.option(
    "--format", "-f", "output_format", type=click.Choice(["text", "json"]), default="text"
)
def compress(
    prompt: str,
    target_ratio: float | None,
    preserve_context: bool | None,
    aggressive: bool | None,
    output_format: str,
) -> None:
    """Compress a prompt without calling an LLM.

    \b
    Examples:
        lesstokens compress "Long prompt ..." --target-ratio 0.5
        lesstokens compress - --format json < prompt.txt
    """
    options = CompressionOptions(
        target_ratio=target_ratio,
        preserve_context=preserve_context,
        aggressive=aggressive,
    )

    try:
        sdk = get_sdk()
        result = run_async(sdk.compress_prompt(_read_prompt(prompt), options))
    except LessTokensError as e:
        click.echo(f"Error: {e}")
        sys.exit(1)

    if output_format == "json":
        click.echo(result.model_dump_json(indent=2))
    else:
        click.echo(result.compressed)
        click.echo(
            f"Tokens: {result.original_tokens} -> {result.compressed_tokens} "
            f"(savings {result.savings}%, ratio {result.ratio})"
        )


# =============================================================================
# Process Command
# =============================================================================


@cli.command()
@click.argument("prompt")
@click.option("--model", "-m", help="Model name (or 'model' in --llm-config)")
@click.option(
    "--llm-config",
    type=click.Path(exists=True, dir_okay=False),
    help="YAML file with LLMConfig fields",
)
@click.option("--temperature", type=float, help="Sampling temperature")
@click.option("--max-tokens", type=int, help="Maximum tokens to generate")
@click.option("--system", "system_prompt", help="System message sent before the prompt")
@click.option("--stream", is_flag=True, help="Stream the response")
@click.option(
    "--format", "-f", "output_format", type=click.Choice(["text", "json"]), default="text"
)
def process(
    prompt: str,
    model: str | None,
    llm_config: str | None,
    temperature: float | None,
    max_tokens: int | None,
    system_prompt: str | None,
    stream: bool,
    output_format: str,
) -> None:
    """Compress a prompt and send it to the configured LLM provider.

    \b
    Examples:
        lesstokens process "Long prompt ..." --model gpt-4o
        lesstokens process "Long prompt ..." --llm-config llm.yaml --stream
    """
    messages = [Message(role="system", content=system_prompt)] if system_prompt else None

    try:
        sdk = get_sdk()
        config = _load_llm_config(
            llm_config,
            sdk.provider,
            {"model": model, "temperature": temperature, "max_tokens": max_tokens},
        )
        text = _read_prompt(prompt)

        if stream:
            run_async(_print_stream(sdk, text, config, messages, output_format))
            return

        response = run_async(sdk.process_prompt(text, config, messages=messages))
    except LessTokensError as e:
        click.echo(f"Error: {e}")
        sys.exit(1)

    if output_format == "json":
        click.echo(response.model_dump_json(indent=2))
    else:
        click.echo(response.content)
        click.echo(_format_usage(response.usage))


async def _print_stream(
    sdk: LessTokensSDK,
    prompt: str,
    config: LLMConfig,
    messages: list[Message] | None,
    output_format: str,
) -> None:
    chunks = await sdk.process_prompt_stream(prompt, config, messages=messages)
    async for chunk in chunks:
        if not chunk.done:
            click.echo(chunk.content, nl=False)
        elif chunk.usage is not None:
            click.echo()
            if output_format == "json":
                click.echo(chunk.usage.model_dump_json(indent=2))
            else:
                click.echo(_format_usage(chunk.usage))


if __name__ == "__main__":
    cli()
