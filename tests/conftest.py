"""
Shared fixtures: throwaway Swift projects and stand-in translators.
"""

import os
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from lproj_localize.config import LocalizeConfig  # noqa: E402


class FakeTranslator:
    """Deterministic translator: 'Hello' -> '[fr] Hello'. Records every call."""

    def __init__(self):
        self.calls = []

    def translate_batch(self, values, source_lang, target_lang):
        self.calls.append((list(values), source_lang, target_lang))
        return [f'[{target_lang}] {value}' for value in values]


class FailingTranslator:
    """Every translation fails, as if the service were down."""

    def __init__(self):
        self.calls = 0

    def translate_batch(self, values, source_lang, target_lang):
        self.calls += 1
        return [None] * len(values)


def write(path, text, newline='\n'):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, 'w', encoding='utf-8', newline=newline) as f:
        f.write(text)


def read(path):
    with open(path, 'r', encoding='utf-8', newline='') as f:
        return f.read()


@pytest.fixture
def fake_translator():
    return FakeTranslator()


@pytest.fixture
def failing_translator():
    return FailingTranslator()


@pytest.fixture
def project(tmp_path):
    """
    A project with one view controller and an empty English table:

        App/ViewController.swift
        App/Resources/en.lproj/Localizable.strings
    """
    root = tmp_path / 'Project'
    write(str(root / 'App' / 'ViewController.swift'),
          'import UIKit\n'
          '\n'
          'final class ViewController: UIViewController {\n'
          '    func setup() {\n'
          '        label.text = "Loc.hello"\n'
          '        button.setTitle("Loc.Tap here", for: .normal)\n'
          '    }\n'
          '}\n')
    write(str(root / 'App' / 'Resources' / 'en.lproj' / 'Localizable.strings'), '')
    return root


@pytest.fixture
def make_config(project):
    def factory(**overrides):
        values = dict(
            project_path=str(project),
            localization_path=str(project / 'App' / 'Resources'),
            base_lang='en',
            string_prefix='Loc',
            localized_prefix='key',
            method_suffix='localized',
        )
        values.update(overrides)
        return LocalizeConfig(**values)
    return factory
