"""
알림 설정
"""

# 메일 제목
ALERT_SUBJECT = "[알림] 보관 중인 상품의 유통기한이 임박했습니다"

# 본문 첫 줄 (이후 "- 상품명 (N일 남음)" 형식으로 나열)
ALERT_HEADING = "유통기한 임박 상품 목록:"

# 본문 마지막 줄
ALERT_FOOTER = ""
