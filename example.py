#!/usr/bin/env python3
"""
Example usage of the Content Visualizer.

This script demonstrates how to classify a handful of captured strings
and print the default view for each of them.
"""

import asyncio
import base64
import gzip
from content_visualizer import ContentInspector, FormatKind, ViewType
from content_visualizer.models import render_table


SAMPLES = {
    "API response": '{"user": {"id": 7, "roles": ["admin", "dev"]}, "active": true}',
    "Access token": (
        "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
        "eyJzdWIiOiIxMjM0NTY3ODkwIiwibmFtZSI6IkpvaG4gRG9lIiwiaWF0IjoxNTE2MjM5MDIyfQ."
        "SflKxwRJSMeKKF2QT4fwpMeJf36POk6yJV_adQssw5c"
    ),
    "Database config": "Server=db.local;Database=orders;User Id=svc;Password=secret;",
    "Nightly job": "30 2 * * 1-5",
    "Request id": "550e8400-e29b-41d4-a716-446655440000",
}


async def main():
    """Main example function."""
    print("Content Visualizer Example")
    print("=" * 50)

    with ContentInspector() as inspector:
        for label, text in SAMPLES.items():
            result = await inspector.inspect(text)
            print(f"\n📄 {label}: {result.profile.title}")
            print(f"   {result.statistics.summary()}")

            view = result.profile.default_view
            output = inspector.render_view(text, result.kind, view)

            if view == ViewType.TREE:
                print(output.render())
            elif view in (ViewType.TABLE, ViewType.CLAIMS):
                print(render_table(output))
            else:
                print(output)

        # GZip bodies look like plain base64, so the kind has to be given
        compressed = base64.b64encode(gzip.compress(b"hello from gzip", mtime=0)).decode("ascii")
        print(f"\n📦 Compressed body: {inspector.decode(compressed, FormatKind.GZIP)}")
        print(inspector.to_hex_dump(compressed, FormatKind.BASE64))


if __name__ == "__main__":
    asyncio.run(main())
