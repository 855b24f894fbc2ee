"""Test setup for pagecraft."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture
def landing_page() -> str:
    """A small generated page exercising most component kinds."""
    return """<!DOCTYPE html>
<html>
<head><meta charset="UTF-8"><title>Landing</title></head>
<body class="bg-white text-black">
  <nav class="flex p-4 shadow-md">
    <span class="logo font-bold text-xl">Acme</span>
    <a href="/about" class="text-black">About</a>
  </nav>
  <!-- hero -->
  <section id="hero" class="py-20 px-8 text-center md:py-12 sm:py-6">
    <h1 class="text-5xl font-extrabold">Build faster</h1>
    <p class="text-lg">Ship pages <strong>today</strong>.</p>
    <a href="#signup" class="btn rounded-lg px-6 py-3 bg-black text-white">Get started</a>
  </section>
  <div class="grid grid-cols-3 gap-6 p-8">
    <div class="card rounded-xl shadow-lg p-4">
      <img src="/one.png" alt="One" class="w-full rounded-md">
      <h3 class="text-xl font-semibold">Fast</h3>
      <p class="text-sm">Renders instantly.</p>
    </div>
  </div>
  <form action="/subscribe"><input type="email" name="email" placeholder="you@example.com"></form>
  <video src="/intro.mp4" controls muted class="w-full"></video>
  <hr class="border-black">
  <footer class="p-6 text-center text-sm">&copy; 2024 Acme &amp; Co</footer>
</body>
</html>"""
