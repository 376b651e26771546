"""테마 패키지 — 매니페스트, 템플릿 레지스트리, 번역 파일, ZIP 설치.

Theme package — Manifest parsing, template registry, locale files and ZIP
installation. Services call into this package; it never touches the database.
"""
