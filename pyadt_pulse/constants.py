import re

DEFAULT_TIMEOUT = 20

# ========== BASE URLS ==========
PORTAL_HOST = "portal.adtpulse.com"
PORTAL_PORT = 443
BASE_URL = f"https://{PORTAL_HOST}"

# ========== PORTAL ENDPOINTS ==========
SIGNIN_URL = f"{BASE_URL}/myhome/access/signin.jsp"  # POST - credentials form
SIGNOUT_URL = f"{BASE_URL}/myhome/access/signout.jsp"  # GET - end session
SUMMARY_URL = f"{BASE_URL}/myhome/summary/summary.jsp"
VERSIONED_SUMMARY_URL = BASE_URL + "/myhome/{version}/summary/summary.jsp"
DEVICE_INFO_URL = f"{BASE_URL}/myhome/system/device.jsp?id=1"  # GET - panel info page
DEVICE_STATUS_URL = f"{BASE_URL}/myhome/ajax/orb.jsp"  # GET - orb text summary
ARM_DISARM_URL = f"{BASE_URL}/myhome/quickcontrol/armDisarm.jsp"
ARM_DISARM_QUERY = "href=rest/adt/ui/client/security/setArmState&armstate={arm_state}&arm={arm}"
FORCE_ARM_URL = f"{BASE_URL}/myhome/quickcontrol/serv/RunRRACommand"
FORCE_ARM_QUERY = "sat={sat}&href=rest/adt/ui/client/security/setForceArm&armstate=forcearm&arm=away"
ZONE_STATUS_URL = f"{BASE_URL}/myhome/ajax/homeViewDevAjax.jsp"  # GET - JSON device list
SYNC_URL = f"{BASE_URL}/myhome/Ajax/SyncCheckServ"  # GET - sync cursor, ?t=<epoch ms>

# ========== HEADERS ==========
USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_14_6) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/76.0.3809.100 Safari/537.36"
)
ACCEPT = (
    "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,"
    "image/apng,*/*;q=0.8,application/signed-exchange;v=b3"
)

# ========== RESPONSE PATH CONTRACTS ==========
# Matched against path + query of the final URL after redirects.
# A miss means the portal bounced us to the sign-in page.
LOGIN_SUCCESS_PATH = re.compile(r"^/myhome/(?P<version>.*)/summary/summary\.jsp$")
DEVICE_INFO_PATH = re.compile(r"^/myhome/.*/system/device\.jsp.*$")
DEVICE_STATUS_PATH = re.compile(r"^/myhome/.*/ajax/orb\.jsp$")
ARM_DISARM_PATH = re.compile(r"^/myhome/.*/quickcontrol/armDisarm\.jsp.*$")
FORCE_ARM_PATH = re.compile(r"^/myhome/.*/quickcontrol/serv/RunRRACommand.*$")
ZONE_STATUS_PATH = re.compile(r"^/myhome/.*/ajax/homeViewDevAjax\.jsp$")
SYNC_PATH = re.compile(r"^/myhome/.*/Ajax/SyncCheckServ.*$")

# ========== CONNECTIVITY PROBE ==========
PROBE_TIMEOUT = 5.0
PROBE_RETRIES = 3

# ========== ARM VOCABULARY ==========
# Current state the portal is leaving. "disarmed+with+alarm" clears an alarm.
ARM_STATES = ("disarmed", "disarmed+with+alarm", "away", "stay")
# Target mode
ARM_MODES = ("off", "away", "stay")

# ========== DEVICE STATES ==========
STATE_DISARMED = "Disarmed"
STATE_ARMED_AWAY = "Armed Away"
STATE_ARMED_STAY = "Armed Stay"
STATE_UNAVAILABLE = "Status Unavailable"

# ========== ZONES ==========
SENSOR_ID_MARKER = "sensor-"
# devStatOK = okay, devStatOpen = door/window open, devStatMotion = motion,
# devStatTamper = glass break or tamper, devStatAlarm = CO/smoke
ZONE_STATES = {
    "devStatOK": "ok",
    "devStatOpen": "open",
    "devStatMotion": "motion",
    "devStatTamper": "tamper",
    "devStatAlarm": "alarm",
}

# ========== MARKUP SELECTORS ==========
DEVICE_LABEL_SELECTOR = "td.InputFieldDescriptionL"
ORB_SUMMARY_SELECTOR = "#divOrbTextSummary span"
ARM_BUTTON_SELECTOR = "#arm_button_1"
