from datetime import date, datetime, timezone

def parse_dt(s):
    if s is None:
        return None
    if isinstance(s, datetime):
        dt = s
    elif isinstance(s, date):
        dt = datetime(s.year, s.month, s.day)
    else:
        ss = str(s).strip()
        if ss == "" or ss.lower() in ("nan", "nat", "none"):
            return None
        # Accept ISO; if no timezone, assume UTC
        try:
            dt = datetime.fromisoformat(ss.replace("Z", "+00:00"))
        except ValueError:
            # try removing subseconds
            try:
                dt = datetime.fromisoformat(ss.split(".")[0].replace("Z", "+00:00"))
            except ValueError:
                # not ISO; callers treat it like a missing date
                return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt

def format_dt(dt, with_time: bool = True) -> str:
    if dt is None:
        return ""
    return dt.strftime("%Y-%m-%d %H:%M") if with_time else dt.strftime("%Y-%m-%d")
