from zoneinfo import ZoneInfo

IST = ZoneInfo("Asia/Kolkata")

UPI_SCHEME = "upi://pay"
