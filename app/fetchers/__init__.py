"""외부 데이터 수집 패키지 — 뉴스/주식 페처와 고정 주기 스케줄러.

External data fetchers package — HackerNews and stock quote fetchers plus
the fixed-rate scheduler that drives them.
"""
