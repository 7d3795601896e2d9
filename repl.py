"""Interactive REPL for pageprobe. Reads commands from stdin, builds selector chains and runs them."""
import asyncio
import logging
import os
import sys

from playwright.async_api import async_playwright

from pageprobe.core import PageProbe, PageProbeError, ProbeConfig


def log_level_from_env() -> int:
    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").strip().upper(), None)
    return level if isinstance(level, int) else logging.INFO


logging.basicConfig(
    level=log_level_from_env(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)],
)
logger = logging.getLogger("pageprobe.repl")

FILTERS = {
    "text": "with_text",
    "exact": "with_exact_text",
    "value": "with_value",
    "placeholder": "with_placeholder",
    "aria": "with_aria_label",
}


async def main():
    config = ProbeConfig.from_env()
    async with async_playwright() as pw:
        browser = await pw.chromium.launch(headless=config.headless)
        context = await browser.new_context(
            viewport={"width": config.viewport_width, "height": config.viewport_height},
        )
        page = await context.new_page()
        probe = PageProbe(config).attach(page)
        print("[READY] pageprobe attached to a chromium page", flush=True)

        current = None
        while True:
            print("CMD>", flush=True)
            try:
                line = await asyncio.get_event_loop().run_in_executor(None, sys.stdin.readline)
                if not line:
                    break
                cmd = line.strip()
                if not cmd:
                    continue
                if cmd == "quit":
                    break

                parts = cmd.split(" ", 1)
                action = parts[0]
                args = parts[1] if len(parts) > 1 else ""

                if action == "goto":
                    await page.goto(args, wait_until="domcontentloaded")
                    print(f"RESULT: {page.url}", flush=True)

                elif action == "selector":
                    current = probe.selector(args)
                    print(f"SELECTOR:\n{current}", flush=True)

                elif action == "load":
                    current = probe.selector_from_state(args)
                    print(f"SELECTOR:\n{current}", flush=True)

                elif current is None:
                    print("ERROR: start a chain with: selector <css>", flush=True)

                elif action == "find":
                    current = current.find(args)
                    print(f"SELECTOR:\n{current}", flush=True)

                elif action in FILTERS:
                    current = getattr(current, FILTERS[action])(args)
                    print(f"SELECTOR:\n{current}", flush=True)

                elif action == "nth":
                    current = current.nth(int(args))
                    print(f"SELECTOR:\n{current}", flush=True)

                elif action == "parent":
                    current = current.parent()
                    print(f"SELECTOR:\n{current}", flush=True)

                elif action == "next":
                    current = current.next_sibling()
                    print(f"SELECTOR:\n{current}", flush=True)

                elif action == "prev":
                    current = current.previous_sibling()
                    print(f"SELECTOR:\n{current}", flush=True)

                elif action == "state":
                    print(f"STATE: {current.to_json()}", flush=True)

                elif action == "count":
                    print(f"RESULT: {await current.count()}", flush=True)

                elif action == "exists":
                    print(f"RESULT: {await current.exists()}", flush=True)

                elif action == "visible":
                    print(f"RESULT: {await current.is_visible(verbose=True)}", flush=True)

                elif action == "viewport":
                    print(f"RESULT: {await current.is_visible_in_viewport(verbose=True)}", flush=True)

                elif action == "moving":
                    print(f"RESULT: {await current.is_moving(verbose=True)}", flush=True)

                elif action == "enabled":
                    print(f"RESULT: {await current.is_enabled()}", flush=True)

                elif action == "checked":
                    print(f"RESULT: {await current.is_checked()}", flush=True)

                elif action == "innertext":
                    print(f"TEXT: {await current.inner_text()}", flush=True)

                elif action == "wait-visible":
                    timeout_ms = int(args) if args else probe.default_wait.timeout_ms
                    await probe.expect_that(current).is_visible(timeout_ms=timeout_ms)
                    print("RESULT: visible", flush=True)

                elif action == "hover":
                    await current.hover()
                    print("RESULT: hovered", flush=True)

                elif action == "click":
                    await current.click()
                    print("RESULT: clicked", flush=True)

                else:
                    print(f"ERROR: unknown command: {action}", flush=True)

            except PageProbeError as e:
                print(f"ERROR: {e}", flush=True)
            except Exception as e:
                logger.exception("[REPL] command failed")
                print(f"ERROR: {e}", flush=True)

        await browser.close()
    print("[DONE]", flush=True)


if __name__ == "__main__":
    asyncio.run(main())
